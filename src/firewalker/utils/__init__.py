"""
firewalker utilities package
"""
