"""Core interfaces.

Why:
- Defines the contracts (Protocol) that models and adapters implement.
- The dispatcher depends on these abstractions, not on httpx or on concrete models.
"""

from core.interfaces.codec import JSONDecodable, JSONEncodable
from core.interfaces.transport import Transport

__all__ = ["JSONDecodable", "JSONEncodable", "Transport"]
