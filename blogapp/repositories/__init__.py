from blogapp.repositories.user import (
    get_user_by_hex_id,
    get_user_by_username,
    get_user_by_email,
    create_user,
    delete_user,
)
from blogapp.repositories.blog import (
    list_categories,
    get_category_by_hex_id,
    get_category_by_name,
    create_category,
    get_post_by_hex_id,
    get_post_detail,
    search_posts,
    create_post,
    update_post,
    delete_post,
    add_comment,
)

__all__ = [
    # User repositories
    "get_user_by_hex_id",
    "get_user_by_username",
    "get_user_by_email",
    "create_user",
    "delete_user",
    # Blog repositories
    "list_categories",
    "get_category_by_hex_id",
    "get_category_by_name",
    "create_category",
    "get_post_by_hex_id",
    "get_post_detail",
    "search_posts",
    "create_post",
    "update_post",
    "delete_post",
    "add_comment",
]
