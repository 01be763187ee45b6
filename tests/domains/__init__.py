# tests/domains/__init__.py

"""
도메인별 테스트 패키지입니다. 현재는 'usr' 도메인 (사용자, 자격증명, 로그인) 테스트를 포함합니다.
"""

__all__ = []
