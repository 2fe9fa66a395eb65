"""
App layer: registry gateway 서버 (FastAPI).

역할:
- on-chain manifest → shadcn registry-item 변환 엔드포인트
- 번들 생성/resolve API (서명/브로드캐스트 없음)
- content store 연결 (ORDFS / in-memory, LRU 캐시)

프로토콜 로직은 src/core, src/bundle에 위임.
"""
