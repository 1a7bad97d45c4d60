"""OptionType enumeration for question options.

Plain constants container (same shape as the other enumerations in this
package) so architectural tests can import it without side effects.
"""

from __future__ import annotations


class OptionType:
    CHECK = "check"
    FREE = "free"

    ALL = frozenset({CHECK, FREE})


__all__ = ["OptionType"]
