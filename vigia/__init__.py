"""
Vigia - Source Package
======================

Moderation ledger for a community: members, message logs, warnings,
timed mutes, bans and support-ticket counts, with a fixed escalation
ladder derived from each member's punishment history.

Package Structure:
- core/: Configuration, logging and the SQLite record store
- services/: Escalation policy, aggregation, moderation facade, reports
- api/: FastAPI application, routers and middleware
- utils/: Timestamp and validation helpers

Version: v1.0.0
"""

__version__ = "1.0.0"
