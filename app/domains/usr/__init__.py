# app/domains/usr/__init__.py

"""
'usr' 도메인 패키지입니다.

사용자(User), 자격증명(UserCredentials) 데이터와 로그인/토큰 발급을 담당합니다.

주요 서브모듈:
- `models.py`: users, user_credentials 테이블에 매핑되는 SQLModel 정의.
- `schemas.py`: 요청 및 응답 DTO (camelCase 별칭 사용).
- `crud.py`: 비동기 CRUD 로직.
- `services.py`: 자격증명 검증과 사용자 프로필 변환.
- `routers.py`: /users, /user-credentials API 엔드포인트.
"""

__all__ = []
