"""Seed content served (and written) when a document does not exist yet."""
from __future__ import annotations

from typing import Any, Dict


def default_events(last_modified: int) -> Dict[str, Any]:
    return {
        "pastEvents": {
            "saturday-sessions": {
                "events": [
                    {
                        "title": "Saturday Seminar 1: Data Meets Finance",
                        "description": "Exploring the intersection of data analytics and financial decision-making",
                    },
                    {
                        "title": "Saturday Seminar 2: Banking 101: Demystifying India's Backbone",
                        "description": "Understanding the fundamentals of India's banking system",
                    },
                ],
            },
            "networking-events": {"comingSoon": True},
            "flagship-event": {"comingSoon": True},
        },
        "upcomingEvents": [],
        "lastModified": last_modified,
    }


def default_sponsors(last_modified: int) -> Dict[str, Any]:
    return {
        "sponsors": [
            {
                "id": "citizen-cooperative-bank",
                "name": "Citizen Cooperative Bank",
                "logo": "/placeholder.svg",
                "industry": "Banking",
                "description": "Cooperative banking institution dedicated to financial inclusion and community development.",
                "website": "https://citizenbankdelhi.com",
                "isActive": False,
            },
            {
                "id": "saint-gobain",
                "name": "Saint Gobain (through Mahantesh Associates)",
                "logo": "/placeholder.svg",
                "industry": "Manufacturing",
                "description": "Global leader in sustainable construction materials.",
                "website": "https://saint-gobain.com",
                "isActive": False,
            },
            {
                "id": "zest-global-education",
                "name": "Zest Global Education",
                "logo": "/placeholder.svg",
                "industry": "Education",
                "description": "International education consultancy providing career guidance to students.",
                "website": "https://zestglobaleducation.com",
                "isActive": False,
            },
            {
                "id": "iqas",
                "name": "IQAS",
                "logo": "/placeholder.svg",
                "industry": "Quality Assurance",
                "description": "Quality assurance and certification services provider.",
                "website": "https://iqas.co.in",
                "isActive": False,
            },
        ],
        "lastModified": last_modified,
    }


def default_luminaries(last_modified: int) -> Dict[str, Any]:
    return {
        "faculty": [
            {
                "id": "sanjay-parab",
                "name": "Dr. Sanjay Parab",
                "title": "Vice Principal and Associate Professor",
                "bio": "Vice Principal with over 21 years of teaching experience in corporate governance and finance.",
                "image": "/placeholder.svg",
                "email": "sanjay.parab@xaviers.edu",
                "linkedin": "sanjay-parab",
                "achievements": ["Over 21 years of teaching experience", "University topper in Company Law (LLB)"],
                "expertise": ["Corporate Governance", "Corporate Finance", "Company Law"],
                "quote": "Excellence in corporate governance and finance education drives sustainable business growth.",
            },
            {
                "id": "pratik-purohit",
                "name": "Mr. Pratik Purohit",
                "title": "Assistant Professor",
                "bio": "Assistant Professor with 6 years of teaching experience in accountancy and management.",
                "image": "/placeholder.svg",
                "email": "pratik.purohit@xaviers.edu",
                "linkedin": "pratik-purohit",
                "achievements": ["M.Com. in Accountancy, PGDFM, M.Phil."],
                "expertise": ["Accountancy", "Financial Management"],
                "quote": "Integrating theoretical knowledge with practical management approaches creates well-rounded financial professionals.",
            },
        ],
        "leadership": [
            {
                "id": "aaradhy-mehra",
                "name": "Aaradhy Mehra",
                "title": "Chairperson – The Finance Symposium (TFS)",
                "bio": "Student leader curating initiatives that connect finance, innovation and enterprise.",
                "image": "/placeholder.svg",
                "email": "aaradhy.mehra@student.xaviers.edu",
                "linkedin": "aaradhy-mehra",
                "achievements": ["Editor-in-Chief – Currency of Change"],
                "expertise": ["Strategic Leadership", "Financial Analysis"],
                "quote": "Balancing entrepreneurial curiosity with creative insight.",
                "isLeadership": True,
            },
        ],
        "lastModified": last_modified,
    }
