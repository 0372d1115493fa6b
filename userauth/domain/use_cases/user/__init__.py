from .create_user import CreateUser
from .delete_user import DeleteUser
from .get_all_users import GetAllUsers
from .get_user import GetUser
from .update_user import UpdateUser

__all__ = ["CreateUser", "GetUser", "GetAllUsers", "UpdateUser", "DeleteUser"]
