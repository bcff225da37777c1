from .headers import init_security
