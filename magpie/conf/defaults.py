"""
magpie.conf.defaults
~~~~~~~~~~~~~~~~~~~~

Represents the default values for all client options.

:copyright: (c) 2010-2012 by the Sentry Team, see AUTHORS for more details.
:license: BSD, see LICENSE for more details.
"""

import socket

# Not all environments have access to socket module, for example Google App Engine
# Need to check to see if the socket module has ``gethostname``, if it doesn't we
# will set it to None and require it passed in to ``Client`` on initializtion.
NAME = socket.gethostname() if hasattr(socket, 'gethostname') else None

SDK_IDENTIFIER = 'magpie.python'

LOGGER = 'magpie'

# Fraction of captured events which are processed at all
SAMPLE_RATE = 1.0

# Lines of source to collect around each stack frame
CONTEXT_LINES = 5

MAX_BREADCRUMBS = 100

# The maximum length to store of a string-like structure.
MAX_LENGTH_STRING = 1024

# The maximum length of a formatted message.
MAX_LENGTH_MESSAGE = 1024

# How deep the serializer descends into nested values.
MAX_DEPTH = 3

MAX_REQUEST_BODY_SIZE = 'medium'

# Upper bound of a request body for each ``max_request_body_size`` value,
# ``None`` meaning unbounded.
REQUEST_BODY_SIZES = {
    'none': 0,
    'never': 0,
    'small': 10 ** 3,
    'medium': 10 ** 4,
    'always': None,
}

# Integrations enabled unless ``default_integrations`` is turned off
INTEGRATIONS = (
    'magpie.integrations.message.MessageIntegration',
    'magpie.integrations.request.RequestIntegration',
    'magpie.integrations.user.UserIntegration',
    'magpie.integrations.context.ContextIntegration',
    'magpie.integrations.breadcrumbs.BreadcrumbIntegration',
    'magpie.integrations.exceptions.ExceptionIntegration',
    'magpie.integrations.environment.EnvironmentIntegration',
    'magpie.integrations.modules.ModulesIntegration',
    'magpie.integrations.stacktrace.StacktraceIntegration',
)

# Client-side data processors to apply
PROCESSORS = (
    'magpie.processors.SerializeDataProcessor',
    'magpie.processors.SanitizeDataProcessor',
    'magpie.processors.SanitizeHttpHeadersProcessor',
)
