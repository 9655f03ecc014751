"""
Ledger errors
=============
Every failure the ledger reports to the user is a ``LedgerError``.  The HTTP layer
maps ``status_code`` to the response; services never return error flags.

  ValidationError     - missing or out-of-range input, nothing was written
  ConflictError       - business rule violation (second open session, home supplier delete)
  NotFoundError       - the record id does not exist (e.g. double delete)
  RemoteError         - the database rejected the operation
  MissingTablesError  - first run, tables have not been created yet
"""


class LedgerError(Exception):
    status_code = 400
    kind = 'error'

    def __init__(self, message, details=None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self):
        payload = {'error': self.kind, 'message': self.message}
        if self.details:
            payload['details'] = self.details
        return payload


class ValidationError(LedgerError):
    status_code = 400
    kind = 'validation_error'


class ConflictError(LedgerError):
    status_code = 409
    kind = 'conflict'


class NotFoundError(LedgerError):
    status_code = 404
    kind = 'not_found'


class RemoteError(LedgerError):
    status_code = 502
    kind = 'remote_error'


class MissingTablesError(RemoteError):
    status_code = 503
    kind = 'missing_tables'

    def __init__(self, message=None, details=None):
        super().__init__(
            message or 'Database tables are missing. Run `flask setup-db` to create them.',
            details,
        )
