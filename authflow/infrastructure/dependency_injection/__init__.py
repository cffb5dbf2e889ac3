from authflow.infrastructure.dependency_injection.auth_dependencies import (
    build_auth_usecase,
    get_notifier,
    get_token_repository,
    get_user_repository,
)

__all__ = ["build_auth_usecase", "get_notifier", "get_token_repository", "get_user_repository"]
