"""
Custom Exception Hierarchy

Distinguishes between:
1. Contract Violations (programming bugs or malformed inbound messages)
2. Business Logic Failures (expected runtime issues)

Job-control and Service Bus failures are not retried locally; they propagate
to the Functions host, which redelivers the triggering message.
"""


class ContractViolationError(TypeError):
    """
    Raised when component contracts are violated.

    These indicate:
    - Wrong types passed to services
    - Inbound messages or events missing required fields
    - Enum value mismatches

    These should NEVER be caught and handled.
    """
    pass


class BusinessLogicError(Exception):
    """
    Base class for expected runtime business logic failures.
    """
    pass


class ServiceBusError(BusinessLogicError):
    """
    Service Bus communication failures.

    Examples:
        - Namespace not configured
        - Queue not found
        - Sender could not be created
    """
    pass


class TableStorageError(BusinessLogicError):
    """
    Table Storage read/write failures for status or health records.
    """
    pass


class JobControlError(BusinessLogicError):
    """
    Media Services management call failed for a reason other than
    "resource not found".
    """
    pass


class NoHealthyInstanceError(BusinessLogicError):
    """
    No enabled media service instance is available for resubmission.
    """
    pass


class LocatorConflictError(BusinessLogicError):
    """
    A streaming locator already exists but is bound to a different asset.

    Indicates out-of-band creation or state corruption; never retried and
    never resolved by overwriting.
    """

    def __init__(self, locator_name: str, existing_asset_name: str, requested_asset_name: str):
        self.locator_name = locator_name
        self.existing_asset_name = existing_asset_name
        self.requested_asset_name = requested_asset_name
        super().__init__(
            f"Locator already exists with incorrect asset name: locator_name={locator_name} "
            f"existing_asset_name={existing_asset_name} requested_asset_name={requested_asset_name}"
        )


class ConfigurationError(Exception):
    """
    System configuration error.

    These are typically fatal and indicate misconfiguration
    that prevents the system from operating.

    Examples:
        - Missing required environment variables
        - Unknown media service instance name
        - Malformed instance configuration secret
    """
    pass
