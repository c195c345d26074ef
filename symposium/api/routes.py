from concurrent.futures import TimeoutError as FutureTimeoutError
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Body, HTTPException, Query, Request
from pydantic import ValidationError

from symposium.errors import DocumentConflictError, DocumentStoreError, DocumentStoreNotConfiguredError
from symposium.schemas.documents import DocumentUpdateRequest
from symposium.schemas.market import MarketDataResponse

router = APIRouter()

DOCUMENT_NAMES = ('events', 'sponsors', 'luminaries')


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _store(request: Request, name: str):
    return request.app.state.document_stores[name]


def _raise_store_error(exc: DocumentStoreError) -> None:
    if isinstance(exc, DocumentStoreNotConfiguredError):
        raise HTTPException(status_code=503, detail='DOCUMENT_STORE_NOT_CONFIGURED') from exc
    if isinstance(exc, DocumentConflictError):
        raise HTTPException(status_code=409, detail='DOCUMENT_VERSION_CONFLICT') from exc
    raise HTTPException(status_code=502, detail='DOCUMENT_STORE_ERROR') from exc


@router.get('/ping')
def ping(request: Request):
    return {'message': request.app.state.settings.PING_MESSAGE}


@router.get('/market-data')
def get_market_data(request: Request):
    feed = request.app.state.market_feed
    settings = request.app.state.settings
    timeout_sec = settings.MARKET_REQUEST_TIMEOUT_SEC

    cached = feed.recent(settings.MARKET_REFRESH_INTERVAL_SEC)
    if cached is not None:
        return MarketDataResponse.from_snapshot(cached).model_dump(mode='json', by_alias=True)

    try:
        snapshot = feed.refresh().result(timeout=timeout_sec)
    except FutureTimeoutError:
        print(f"[MARKET][request_timeout] timeout_sec={timeout_sec}", flush=True)
        snapshot = feed.orchestrator.fallback_snapshot(source='server-fallback')
    except Exception as exc:
        print(f"[MARKET][request_error] error={exc}", flush=True)
        snapshot = feed.orchestrator.fallback_snapshot(source='server-fallback')

    return MarketDataResponse.from_snapshot(snapshot).model_dump(mode='json', by_alias=True)


@router.get('/metrics/market')
def get_market_metrics(request: Request):
    feed = request.app.state.market_feed
    return {
        'connection_status': feed.connection_status(),
        'feed': feed.metrics(),
        'orchestrator': feed.orchestrator.metrics(),
    }


def _register_document_routes(name: str) -> None:
    invalid_code = f'INVALID_{name.upper()}_DOCUMENT'

    def get_document(request: Request):
        document = _store(request, name).load()
        return {
            'success': True,
            'data': document.model_dump(mode='json', by_alias=True, exclude_none=True),
            'timestamp': _now_iso(),
        }

    def update_document(request: Request, payload: Any = Body(default=None)):
        store = _store(request, name)
        try:
            envelope = DocumentUpdateRequest.model_validate(payload)
            document = store.model.model_validate(envelope.data)
        except ValidationError as exc:
            raise HTTPException(status_code=400, detail=invalid_code) from exc

        try:
            store.save(document)
        except DocumentStoreError as exc:
            print(f"[DOCS][save_error] name={name} error={exc}", flush=True)
            _raise_store_error(exc)

        return {
            'success': True,
            'message': f'{name.capitalize()} configuration updated successfully',
            'timestamp': _now_iso(),
        }

    def check_document_sync(request: Request, last_modified: str | None = Query(default=None, alias='lastModified')):
        try:
            client_last_modified = int(last_modified) if last_modified else 0
        except ValueError as exc:
            raise HTTPException(status_code=400, detail='INVALID_LAST_MODIFIED') from exc
        status = _store(request, name).check_sync(client_last_modified)
        return status.model_dump(by_alias=True)

    router.add_api_route(f'/{name}', get_document, methods=['GET'], name=f'get_{name}')
    router.add_api_route(f'/{name}', update_document, methods=['POST'], name=f'update_{name}')
    router.add_api_route(f'/{name}/sync', check_document_sync, methods=['GET'], name=f'check_{name}_sync')


for _name in DOCUMENT_NAMES:
    _register_document_routes(_name)
