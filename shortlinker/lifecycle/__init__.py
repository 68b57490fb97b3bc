from shortlinker.lifecycle.shortcodes import generate_shortcode, validate_custom_shortcode, ensure_shortcode_available
from shortlinker.lifecycle.expiry import compute_expiry, is_expired, validate_validity
from shortlinker.lifecycle.clicks import build_click_event, record_click
from shortlinker.lifecycle.service import ShortURLService, validate_target_url


__all__ = [
    'generate_shortcode',
    'validate_custom_shortcode',
    'ensure_shortcode_available',
    'compute_expiry',
    'is_expired',
    'validate_validity',
    'build_click_event',
    'record_click',
    'ShortURLService',
    'validate_target_url',
]
