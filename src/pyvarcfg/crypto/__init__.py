# -*- encoding: utf-8 -*-
# @File   : __init__.py
# @Time   : 2024/11/05 22:30:02
# @Author : Kariko Lin

from .stream import CipherMode, EncryptedFile
