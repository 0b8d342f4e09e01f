from lockbox.app.models.lockbox import Lockbox
from lockbox.app.models.setting import Setting, MASTER_PASSWORD_HASH_KEY

__all__ = ["Lockbox", "Setting", "MASTER_PASSWORD_HASH_KEY"]
