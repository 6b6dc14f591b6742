# Services package init
"""
SubsAPI: Services Layer
=========================

Service Inventory:
    - overlap: Pure overlap-accounting engine (interval clipping, month
      deduplication, cost folding). No I/O.
    - SubscriptionService: CRUD, request validation, summary orchestration
      over an AsyncSession.
"""
