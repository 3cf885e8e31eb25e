"""bizledger package.

Business-management backend (HR/payroll, attendance, overtime, accounting)
organized by feature modules with a thin Flask controller layer, service
layer, and a single application-state document kept in sync with Firestore.
"""
