# Logging event codes
SHORT_URLS_LISTED = 'SHORT_URLS_LISTED'
