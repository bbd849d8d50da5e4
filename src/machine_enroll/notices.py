"""Default notice texts shown to the operator."""

LOCAL_HOST_TITLE = "Cannot add the local machine"
LOCAL_HOST_MESSAGE = (
    "The local computer is monitored already. Enter the name or IP address "
    "of a remote machine."
)

DUPLICATE_HOST_TITLE = "Machine already registered"
DUPLICATE_HOST_MESSAGE = (
    "A machine with this host name is registered already. Enter a different "
    "host name or edit the existing machine."
)

OVERWRITE_TITLE = "Machine already exists"
OVERWRITE_MESSAGE = (
    "A machine with this host name is registered already. Do you want to "
    "replace it with the new credentials?"
)

CONNECTION_SUCCESSFUL_TITLE = "Connection successful"
CONNECTION_SUCCESSFUL_MESSAGE = (
    "The connection to the remote machine was established with the given "
    "credentials."
)
