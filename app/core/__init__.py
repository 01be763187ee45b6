# app/core/__init__.py

"""
FastAPI 애플리케이션의 핵심 구성 요소 패키지입니다.

- `config.py`: 애플리케이션 설정 및 환경 변수 관리 (Pydantic Settings).
- `database.py`: 데이터베이스 연결, 세션 관리 (SQLModel 및 AsyncSQLAlchemy).
- `crud_base.py`: 공통 비동기 CRUD 기본 클래스.
- `filters.py`: where / filter 쿼리 파라미터 해석.
- `security.py`: 비밀번호 해싱, 토큰 발급/검증, 인증 전략.
- `dependencies.py`: FastAPI 의존성 주입에서 사용하는 공통 의존성 함수들.
- `tasks.py`: ARQ 워커 유지보수 태스크.
"""

__all__ = []
