# tests/__init__.py

"""
User Account API 테스트 스위트 패키지입니다.

- `conftest.py`: 인메모리 SQLite 세션, 테스트 클라이언트, 사용자 생성 팩토리 등 공용 픽스처.
- `core/`: 필터 해석, 설정 검증, 보안 유틸리티, 백그라운드 태스크 단위 테스트.
- `domains/`: 'usr' 도메인 API 통합 테스트.
"""

__title__ = "User Account API Tests"
__version__ = "0.1.0"
__all__ = []
