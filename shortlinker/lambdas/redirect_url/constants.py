# Logging event & error codes
MISSING_SHORTCODE = 'MISSING_SHORTCODE'
REDIRECT_SUCCESS = 'REDIRECT_SUCCESS'
