"""HostPilot property management backend: Captain Cortex grounded answers."""
