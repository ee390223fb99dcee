# -*- encoding: utf-8 -*-
# @File   : __init__.py
# @Time   : 2024/11/07 02:01:17
# @Author : Kariko Lin

from .model import ConfigFile
from .parser import ConfigFileParser, ConfigYamlParser
