"""
WSGI入口文件
用于Gunicorn部署
"""
import os

from schema_diagram.web_app.app import app
from schema_diagram.web_app.app_config import ProductionConfig, get_config

config = get_config()
if config is ProductionConfig:
    config.validate()

# 更新应用配置
app.config.update({
    'SECRET_KEY': config.SECRET_KEY,
    'DEBUG': config.DEBUG,
    'MAX_CONTENT_LENGTH': config.MAX_CONTENT_LENGTH
})

if __name__ == "__main__":
    app.run(host=os.getenv('HOST', '0.0.0.0'), port=int(os.getenv('PORT', '5001')), debug=config.DEBUG)
else:
    # 这是WSGI服务器调用的应用对象
    application = app
