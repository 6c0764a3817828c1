"""
App layer: UI + API 서버 (FastAPI + Jinja2).

역할:
- 입력 폼, 결과 화면, JSON API
- upstream provider 호출 (services/explain.py에 위임)

주의: 폴더 구분
- src/app/templates/ → Jinja2 HTML
- src/app/static/    → CSS
"""
