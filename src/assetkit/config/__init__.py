"""Pipeline configuration"""
