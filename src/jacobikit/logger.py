"""Contains the name for the logger of JacobiKit modules.

``jacobikit`` logs through the
`Logging <https://docs.python.org/3/library/logging.html>`__ standard library.
Logging messages are grouped in different levels:

* ``DEBUG``: Details of binding, method changes and individual evaluations.
* ``WARNING``: An indication that a Jacobian column is likely meaningless,
    e.g. because a step size is lost to floating-point rounding.

The library installs no handlers, so by default only messages of level
``WARNING`` reach the last-resort handler.

Calling applications can configure the format and log level of the displayed messages
by `Configuring Logging <https://docs.python.org/3/howto/logging.html#configuring-logging>`__
for ``jacobikit.logger.jacobikit_logger``, e.g.::

    >>> import logging
    >>> logging.basicConfig(
    ...     level=logging.DEBUG,
    ...     format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
    ... )
"""
import logging

logger_name = "jacobikit"
jacobikit_logger = logging.getLogger(logger_name)
