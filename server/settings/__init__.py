"""Main django-split-settings file.

Settings are assembled from ``components/`` and the environment module
selected by the ``DJANGO_ENV`` variable (``development`` by default).
"""

from os import environ

import django_stubs_ext
from split_settings.tools import include, optional

# Allows generic subscripts such as ``admin.ModelAdmin[File]`` at runtime
django_stubs_ext.monkeypatch()

environ.setdefault('DJANGO_ENV', 'development')
_ENV = environ['DJANGO_ENV']

_base_settings = (
    'components/common.py',
    'components/logging.py',
    'components/storages.py',
    'components/accounts.py',
    'components/files.py',

    # Select the right env:
    'environments/{0}.py'.format(_ENV),

    # Optionally override some settings:
    optional('environments/local.py'),
)

include(*_base_settings)
