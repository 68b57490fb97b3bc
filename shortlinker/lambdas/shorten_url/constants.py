# Logging event & error codes
INVALID_JSON_BODY = 'INVALID_JSON_BODY'
SHORT_URL_CREATED = 'SHORT_URL_CREATED'
