"""Where the lambda is running

Locally run handlers (SAM `local invoke` / `local start-api`, or
`APP_ENV=local`) let unexpected exceptions propagate for debugging and read
AppConfig through the agent URL instead of the Lambda extension.
"""

import os

from shortlinker.constants import ENV


LOCAL_ENVIRONMENTS = frozenset({'local'})


def sam_local() -> bool:
    """True inside a SAM CLI container (it sets AWS_SAM_LOCAL=true)"""
    return os.getenv(ENV.App.AWS_SAM_LOCAL) == 'true'


def running_locally() -> bool:
    return os.getenv(ENV.App.APP_ENV, '').lower() in LOCAL_ENVIRONMENTS or sam_local()
