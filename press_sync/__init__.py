"""
Press SYNC gateway: turns a publishing outlet into a front-end for the
Press Blockchain gateway.

Every article submission passes, in order:
1. Field validation (title, content, 0x fee TXID)
2. Outlet configuration check
3. On-chain fee verification (installer API)
4. AI moderation

All blockchain work happens in the external gateway. This package holds
the HTTP contract, the local submission/article store, and the vote and
co-author bookkeeping.
"""

__version__ = "1.0.0"
