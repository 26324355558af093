# app/api/deps.py
from app.core.ownership import OwnerContext, local_owner

def get_current_owner() -> OwnerContext:
    """
    현재 요청의 소유자.
    인증이 붙으면 여기만 토큰 기반으로 바꾸면 된다 (서비스 시그니처는 그대로).
    """
    return local_owner()
