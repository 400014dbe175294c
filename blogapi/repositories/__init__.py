"""레포지토리 패키지 — 데이터베이스 쿼리 계층.

Repository package — Database query layer.
Repositories perform plain ORM calls; business rules live in services.
"""
