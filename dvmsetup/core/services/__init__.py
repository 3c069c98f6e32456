"""
Services — probes, remediation actions, the menu, and templating.

Each service takes a HostView (and, where it runs commands, an
AdapterRegistry) as an argument; none of them touch the host directly.
"""
