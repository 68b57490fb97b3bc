# Logging event & error codes
MISSING_SHORTCODE = 'MISSING_SHORTCODE'
STATS_RETRIEVED = 'STATS_RETRIEVED'
