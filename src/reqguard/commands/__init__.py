"""Built-in CLI sub-commands for reqguard.

* :mod:`~reqguard.commands.call` -- run one request through the pipeline.
* :mod:`~reqguard.commands.token` -- manage the cached user token.
* :mod:`~reqguard.commands.config` -- view and modify global settings.
"""
