"""
설정 모듈
"""
from .base import get_config, Config, DevelopmentConfig, ProductionConfig, TestingConfig

__all__ = ['get_config', 'Config', 'DevelopmentConfig', 'ProductionConfig', 'TestingConfig']
