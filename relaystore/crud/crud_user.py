from relaystore.crud.base import CRUDBase
from relaystore.models.user import User
from relaystore.schemas.user import UserCreate

user = CRUDBase[User, UserCreate](User)
