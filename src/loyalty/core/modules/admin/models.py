from loyalty.core.db import MongoModel


class Admin(MongoModel):
    """Console operator account.

    Indexed on username - unique.
    """

    username: str
    password_hash: str  # bcrypt hash
