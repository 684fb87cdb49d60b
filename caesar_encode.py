#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Шифровальщик строки шифром Цезаря (алфавит из 75 символов)"""

import sys
from typing import List, Optional

from caesar import ConfigError, encode_text


def main(argv: Optional[List[str]] = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    if len(argv) < 2:
        print("Использование: python3 caesar_encode.py <ключ> <текст>")
        print("Пример: python3 caesar_encode.py 3 'Привет, мир!'")
        return 1

    try:
        key = int(argv[0])
    except ValueError:
        print("❌ Ошибка: ключ должен быть числом")
        return 1

    text = ' '.join(argv[1:])
    try:
        encrypted = encode_text(text, key)
    except ConfigError as e:
        print(f"❌ Ошибка: {e}")
        return 1

    print(f"Ключ: {key}")
    print(f"Исходный текст: {text}")
    print(f"Зашифрованный: {encrypted}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
