# -*- coding: utf-8 -*-
"""
配置管理模块 - 从环境变量加载配置
"""
import os
from dotenv import load_dotenv

# 加载 .env 文件（如果存在）
load_dotenv()


class Config:
    """基础配置类"""

    # Flask 配置
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key-change-in-production')
    MAX_CONTENT_LENGTH = int(os.getenv('MAX_CONTENT_LENGTH', str(16 * 1024 * 1024)))
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

    # 画布与布线配置
    GRID_SIZE = int(os.getenv('GRID_SIZE', '20'))
    CANVAS_WIDTH = int(os.getenv('CANVAS_WIDTH', '3000'))
    CANVAS_HEIGHT = int(os.getenv('CANVAS_HEIGHT', '2000'))
    DEFAULT_ROUTE_MODE = os.getenv('DEFAULT_ROUTE_MODE', 'orthogonal')

    @classmethod
    def get_routing_config(cls):
        """获取布线配置字典"""
        return {
            'cell_size': cls.GRID_SIZE,
            'canvas_width': cls.CANVAS_WIDTH,
            'canvas_height': cls.CANVAS_HEIGHT,
            'mode': cls.DEFAULT_ROUTE_MODE,
        }


class DevelopmentConfig(Config):
    """开发环境配置"""
    DEBUG = True


class ProductionConfig(Config):
    """生产环境配置"""
    DEBUG = False

    @classmethod
    def validate(cls):
        """验证生产环境必需的配置"""
        if cls.SECRET_KEY == 'dev-secret-key-change-in-production':
            raise ValueError("生产环境缺少必需的配置: SECRET_KEY")


class TestingConfig(Config):
    """测试环境配置"""
    TESTING = True
    DEBUG = False


# 根据环境变量选择配置
def get_config():
    """根据 FLASK_ENV 环境变量获取对应的配置类"""
    env = os.getenv('FLASK_ENV', 'development')

    config_map = {
        'development': DevelopmentConfig,
        'production': ProductionConfig,
        'testing': TestingConfig
    }

    return config_map.get(env, DevelopmentConfig)


# 便捷访问
config = get_config()
