"""
API 라우트 패키지

각 기능별 라우터 모듈:
- health: 헬스 체크
- transactions: 거래 목록/생성/조회
- accounts: 계정 관리, 잔액, 시산표
"""
