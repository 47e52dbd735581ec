"""
Domain core: access policy, job lifecycle rules, problem-report rules,
download naming, and real-time event distribution.
"""
