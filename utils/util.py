import json
import logging
from utils import params
import os


def get_logger(name=None):
    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)

    if not logger.handlers:
        os.makedirs(params.OUTPUT_PATH, exist_ok=True)
        file_handler = logging.FileHandler(os.path.join(params.OUTPUT_PATH, 'running.log'))
        file_handler.setLevel(logging.DEBUG)
        file_formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        file_handler.setFormatter(file_formatter)

        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.INFO)
        console_formatter = logging.Formatter('%(levelname)s - %(message)s')
        console_handler.setFormatter(console_formatter)

        logger.addHandler(file_handler)
        logger.addHandler(console_handler)
    return logger


def load_json(path):
    with open(path, 'r', encoding='utf-8') as f:
        return json.load(f)
