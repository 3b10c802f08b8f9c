# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

import json
import logging
from decimal import Decimal
import datetime as dt


class LoggerUtil:
    """
    Utility class for creating and configuring a logger with a specific format.
    """
    def __init__(self):
        self.logger = LoggerUtil.create_logger()

    @staticmethod
    def create_logger():
        """
        Creates and configures a logger with a specific format.

        Returns
        -------
        logging.Logger
            Configured logger instance.
        """
        formatter = logging.Formatter(
            "{%(pathname)s:%(lineno)d} %(levelname)s - %(message)s"
        )
        handler = logging.StreamHandler()
        handler.setFormatter(formatter)

        # Remove the default logger in order to avoid duplicate log messages
        # after we attach our custom logging handler.
        logging.getLogger().handlers.clear()
        logger = logging.getLogger()
        logger.setLevel(logging.INFO)
        logger.addHandler(handler)

        return logger


class JsonUtil:
    """
    Utility class for JSON encoding and decoding of workflow payloads and AWS responses.
    """

    @staticmethod
    def json_encoder_default(obj):
        """
        Default JSON encoder for non-standard data types.

        Parameters
        ----------
        obj : Any
            Object to encode.

        Returns
        -------
        str or int or float
            JSON serializable representation of the object.
        """
        if isinstance(obj, Decimal):
            return int(obj) if obj % 1 == 0 else float(obj)

        if isinstance(obj, (dt.date, dt.datetime)):
            return obj.isoformat()

        return str(obj)

    @staticmethod
    def to_plain(obj):
        """
        Round-trip an object through JSON so that datetimes, Decimals and other SDK types
        become plain JSON values.
        """
        return json.loads(json.dumps(obj, default=JsonUtil.json_encoder_default))

    @staticmethod
    def to_dynamodb(obj):
        """
        Round-trip an object through JSON so that it can be written with the DynamoDB resource API
        (floats become Decimals).
        """
        return json.loads(json.dumps(obj, default=JsonUtil.json_encoder_default), parse_float=Decimal)


class DateUtil:
    """
    Utility class for handling datetime operations.
    """

    @staticmethod
    def get_current_utc_iso_timestamp():
        """
        Creates a timestamp in ISO 8601 UTC format.
        """
        now_utc = dt.datetime.now(dt.timezone.utc)
        return now_utc.isoformat()

    @staticmethod
    def get_current_epoch_millis() -> int:
        """
        Milliseconds since the epoch, the unit used for stack name suffixes.
        """
        return int(dt.datetime.now(dt.timezone.utc).timestamp() * 1000)
