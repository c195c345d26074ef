class DocumentStoreError(RuntimeError):
    """Remote document store rejected or failed a request."""


class DocumentConflictError(DocumentStoreError):
    """Document version token (file SHA) no longer matches the stored file."""


class DocumentStoreNotConfiguredError(DocumentStoreError):
    pass
