class BotLedgerError(Exception):
    """Base class for errors raised by the bot ledger services"""


class PersistenceError(BotLedgerError):
    """A store operation failed (connectivity, permission, missing record on a required read)"""


class BotNotFoundError(PersistenceError):
    """The bot addressed by (owner_id, bot_id) does not exist"""

    def __init__(self, owner_id: str, bot_id):
        super().__init__(f"Bot {bot_id} not found for owner {owner_id}")
        self.owner_id = owner_id
        self.bot_id = bot_id


class ValidationError(BotLedgerError):
    """Caller supplied structurally invalid input"""
