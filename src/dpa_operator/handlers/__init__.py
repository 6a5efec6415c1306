"""Handler modules for CRD resources."""

# Import handlers to register them - all handlers register themselves via @kopf decorators
from . import data_protection_application  # noqa: F401
from . import data_protection_test  # noqa: F401
from . import watch  # noqa: F401
