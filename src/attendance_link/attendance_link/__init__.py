"""Course Attendance Link package.

Feature modules (courses, locations, link, attendance, ...) keep the same
layering: plain domain models, repository Protocols with MySQL
implementations, services holding the rules and thin Flask controllers.
"""
