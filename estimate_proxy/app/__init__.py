"""
App layer: HTTP 서버 (FastAPI).

역할:
- 추출 요청 프록시 (content block → 선택된 벤더 → 정규화 응답)
- Selected Configuration 조회/변경 (관리자 비밀번호)
- 견적서 품목 추출 보조
"""
