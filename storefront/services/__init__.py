# Services package init
"""
Storefront API — Services Layer
=================================

Service Inventory:
    - CrudService:  generic create/update/delete/get/list/search over one model
                    (customer_service, product_service, order_service)
    - UserService:  account creation with password hashing, username lookup
    - AuthService:  token issue/verify/revoke, login/logout
    - passwords:    passlib hashing helpers
"""
