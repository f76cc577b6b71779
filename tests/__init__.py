"""authkit 测试"""
