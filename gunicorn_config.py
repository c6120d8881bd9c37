"""
Gunicorn配置文件
"""
import multiprocessing
import os

# 服务器socket
bind = os.getenv("BIND", "0.0.0.0:5001")  # 监听地址和端口
backlog = 2048

# 工作进程：解析和布线都是同步的纯计算
workers = multiprocessing.cpu_count() * 2 + 1
worker_class = "sync"
timeout = 30
keepalive = 2

# 重启
max_requests = 1000  # 每个工作进程处理请求的最大数量
max_requests_jitter = 50  # 随机抖动
preload_app = True  # 预加载应用

# 日志
accesslog = "-"
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info").lower()
access_log_format = '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s "%(f)s" "%(a)s"'

# 进程命名
proc_name = "schema_diagram_app"

daemon = False
