"""Start the API with uvicorn.

  python run_api.py --port 8080 --reload
"""
import argparse
import os

import uvicorn


def main():
  parser = argparse.ArgumentParser(description="Radio Rasclat content API")
  parser.add_argument('--host', default=os.getenv('API_HOST', '127.0.0.1'))
  parser.add_argument('--port', type=int, default=int(os.getenv('API_PORT', '8080')))
  parser.add_argument('--reload', action='store_true')
  parser.add_argument('--log-level', default='info', choices=['debug', 'info', 'warning', 'error'])
  args = parser.parse_args()
  uvicorn.run("rasclat.main:app", host=args.host, port=args.port, reload=args.reload, log_level=args.log_level)


if __name__ == '__main__':
  main()
