# tests/core/__init__.py

"""공통 core 모듈 단위 테스트 패키지입니다."""

__all__ = []
