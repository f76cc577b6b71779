"""authkit - 多平台第三方登录工具包"""

__version__ = "0.1.0"
