MAIN_MODULES = ("setup", "hr", "chat")

ALL_PERMISSIONS = MAIN_MODULES + (
    "hr/payroll",
    "hr/tasks",
    "hr/enquiries",
    "hr/vehicles",
    "hr/attendance",
    "setup/customers",
    "setup/suppliers",
    "setup/items",
    "setup/divisions",
)
