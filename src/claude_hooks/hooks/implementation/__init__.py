"""Built-in handler registries for claude_hooks.

Implementations live under this subpackage (keeps the runner and the
handlers separated). Load one with ``load_handlers("<module>:handlers")``.
"""
