# app/__init__.py

"""
사용자 계정 관리 API의 메인 패키지입니다.

이 패키지는 FastAPI 애플리케이션의 진입점 (main.py)과
공통 설정, 데이터베이스 연결, 보안 관련 유틸리티를 담는 core 서브패키지,
그리고 사용자/자격증명 도메인을 담는 domains 서브패키지로 구성됩니다.
"""

APP_NAME = "User Account API"
APP_VERSION = "0.1.0"

__version__ = APP_VERSION
__title__ = APP_NAME
__description__ = "User account management API (users, credentials, login)."
__all__ = []
