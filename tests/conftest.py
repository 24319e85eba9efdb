import os
import sys

import pytest

# ensure workspace root is on sys.path so the package imports without installing
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)


ACCESS_LOG = "\n".join([
    '192.168.1.10 - - [10/Oct/2024:13:55:36 +0000] "GET /index.html HTTP/1.1" 200 2326 "-" "Mozilla/5.0" rt=0.120',
    '192.168.1.10 - - [10/Oct/2024:13:55:37 +0000] "GET /api/users?id=1 HTTP/1.1" 200 512 "-" "Mozilla/5.0" rt=0.080',
    '10.0.0.5 - - [10/Oct/2024:13:55:38 +0000] "POST /api/login HTTP/1.1" 401 128 "https://example.com/" "curl/7.68.0" rt=0.040',
    '10.0.0.7 - - [10/Oct/2024:13:55:39 +0000] "GET /missing HTTP/1.1" 404 0 "-" "Googlebot/2.1" rt=0.010',
    '10.0.0.8 - - [10/Oct/2024:13:55:40 +0000] "GET /api/users HTTP/1.1" 502 0 "-" "Mozilla/5.0" rt=1.500',
])

ERROR_LOG = "\n".join([
    '2024/01/01 12:00:00 [error] 1234#0: *1 upstream timed out (110: Connection timed out) while reading response header from upstream',
    '2024/01/01 12:00:01 [error] 1234#0: *2 upstream timed out (110: Connection timed out) while reading response header from upstream',
    '2024/01/01 12:00:02 [crit] 1234#0: *3 open() "/var/cache/nginx/x" failed (13: Permission denied)',
    '2024/01/01 12:00:03 [warn] 1234#0: *4 an upstream response is buffered to a temporary file',
    'this line is not an nginx error line',
])

WRK_OUTPUT = """Running 30s test @ http://127.0.0.1:8080/index.html
  12 threads and 400 connections
  Thread Stats   Avg      Stdev     Max   +/- Stdev
    Latency   635.91us    0.89ms  12.92ms   93.69%
    Req/Sec    56.20k     8.07k   62.00k    86.54%
  Latency Distribution
     50%  250.00us
     75%  491.00us
     90%  700.00us
     99%    5.80ms
  22464657 requests in 30.00s, 17.76GB read
  Socket errors: connect 0, read 0, write 0, timeout 12
Requests/sec: 748868.53
Transfer/sec:    606.33MB
"""

WRK_SLOW_OUTPUT = """Running 10s test @ http://localhost/
  2 threads and 10 connections
  Thread Stats   Avg      Stdev     Max   +/- Stdev
    Latency     1.20s   100.00ms   1.50s    70.00%
    Req/Sec     4.00      1.00     6.00     80.00%
  80 requests in 10.00s, 20.00KB read
  Socket errors: connect 0, read 0, write 0, timeout 0
Requests/sec:      8.00
Transfer/sec:      2.00KB
"""

AB_OUTPUT = """This is ApacheBench, Version 2.3 <$Revision: 1879490 $>
Copyright 1996 Adam Twiss, Zeus Technology Ltd, http://www.zeustech.net/
Licensed to The Apache Software Foundation, http://www.apache.org/

Benchmarking localhost (be patient)


Server Software:        nginx/1.24.0
Server Hostname:        localhost
Server Port:            80

Document Path:          /
Document Length:        615 bytes

Concurrency Level:      10
Time taken for tests:   1.234 seconds
Complete requests:      1000
Failed requests:        30
Non-2xx responses:      20
Total transferred:      848000 bytes
HTML transferred:       615000 bytes
Requests per second:    810.37 [#/sec] (mean)
Time per request:       12.340 [ms] (mean)
Time per request:       1.234 [ms] (mean, across all concurrent requests)
Transfer rate:          671.09 [Kbytes/sec] received

Connection Times (ms)
              min  mean[+/-sd] median   max
Connect:        0    0   0.1      0       1
Processing:     2   12   3.0     11      45
Waiting:        1   11   2.9     11      44
Total:          2   12   3.0     11      45

Percentage of the requests served within a certain time (ms)
  50%     11
  66%     12
  75%     13
  80%     14
  90%     16
  95%     18
  98%     22
  99%     25
 100%     45 (longest request)
"""

K6_TEXT_OUTPUT = """
  execution: local
     script: script.js
     output: -

     data_received..................: 2.4 MB 80 kB/s
     data_sent......................: 220 kB 7.3 kB/s
     http_req_blocked...............: avg=12.5us   min=1us     med=3us     max=2.1ms    p(90)=5us     p(95)=7us
     http_req_duration..............: avg=245.12ms min=101.3ms med=230.5ms max=1.2s     p(90)=380.2ms p(95)=420.7ms
       { expected_response:true }...: avg=240.1ms  min=101.3ms med=228.1ms max=1.1s     p(90)=370.5ms p(95)=410.2ms
     http_req_failed................: 2.50%  ✓ 50       ✗ 1950
     http_reqs......................: 2000   66.4/s
     iteration_duration.............: avg=1.25s    min=1.1s    med=1.23s   max=2.2s     p(90)=1.38s   p(95)=1.42s
     iterations.....................: 2000   66.4/s
     vus............................: 10     min=10       max=10
     vus_max........................: 10     min=10       max=10
"""

K6_JSON_OUTPUT = """{
  "metrics": {
    "http_req_duration": {"type": "trend", "contains": "time",
      "values": {"avg": 120.5, "min": 10.1, "med": 100.2, "max": 900.3,
                 "p(90)": 200.1, "p(95)": 250.4, "p(99)": 400.9}},
    "http_reqs": {"type": "counter", "values": {"count": 12000, "rate": 400.0}},
    "http_req_failed": {"type": "rate", "values": {"rate": 0.0, "passes": 0, "fails": 12000}},
    "data_received": {"type": "counter", "values": {"count": 1048576, "rate": 34952.5}},
    "vus_max": {"type": "gauge", "values": {"value": 50, "min": 50, "max": 50}}
  },
  "state": {"testRunDurationMs": 30000.5}
}"""

AUTOCANNON_OUTPUT = """Running 10s test @ http://localhost:3000
10 connections

┌─────────┬──────┬──────┬───────┬───────┬─────────┬─────────┬────────┐
│ Stat    │ 2.5% │ 50%  │ 97.5% │ 99%   │ Avg     │ Stdev   │ Max    │
├─────────┼──────┼──────┼───────┼───────┼─────────┼─────────┼────────┤
│ Latency │ 1 ms │ 4 ms │ 12 ms │ 15 ms │ 4.52 ms │ 2.81 ms │ 120 ms │
└─────────┴──────┴──────┴───────┴───────┴─────────┴─────────┴────────┘
┌───────────┬─────────┬─────────┬─────────┬─────────┬──────────┬─────────┬─────────┐
│ Stat      │ 1%      │ 2.5%    │ 50%     │ 97.5%   │ Avg      │ Stdev   │ Min     │
├───────────┼─────────┼─────────┼─────────┼─────────┼──────────┼─────────┼─────────┤
│ Req/Sec   │ 1500    │ 1500    │ 2100    │ 2300    │ 2050.5   │ 210.3   │ 1500    │
├───────────┼─────────┼─────────┼─────────┼─────────┼──────────┼─────────┼─────────┤
│ Bytes/Sec │ 300 kB  │ 300 kB  │ 420 kB  │ 460 kB  │ 410 kB   │ 42 kB   │ 300 kB  │
└───────────┴─────────┴─────────┴─────────┴─────────┴──────────┴─────────┴─────────┘

Req/Bytes counts sampled once per second.
# of samples: 10

21k requests in 10.02s, 4.1 MB read
"""

SIEGE_OUTPUT = """** SIEGE 4.0.4
** Preparing 25 concurrent users for battle.
The server is now under siege...
Lifting the server siege...
Transactions:\t\t        4800 hits
Availability:\t\t       96.00 %
Elapsed time:\t\t       29.51 secs
Data transferred:\t        8.23 MB
Response time:\t\t        0.65 secs
Transaction rate:\t      162.66 trans/sec
Throughput:\t\t        0.28 MB/sec
Concurrency:\t\t       24.82
Successful transactions:        4800
Failed transactions:\t         200
Longest transaction:\t        2.10
Shortest transaction:\t        0.02
"""

SIEGE_JSON_OUTPUT = """{\t"transactions":\t\t\t        1000,
\t"availability":\t\t\t      100.00,
\t"elapsed_time":\t\t\t        5.02,
\t"data_transferred":\t\t        0.59,
\t"response_time":\t\t        0.05,
\t"transaction_rate":\t\t      199.20,
\t"throughput":\t\t\t        0.12,
\t"concurrency":\t\t\t        9.97,
\t"successful_transactions":\t        1000,
\t"failed_transactions":\t\t           0,
\t"longest_transaction":\t\t        0.21,
\t"shortest_transaction":\t\t        0.00
}
"""


@pytest.fixture
def access_log():
    return ACCESS_LOG


@pytest.fixture
def error_log():
    return ERROR_LOG


@pytest.fixture
def tool_outputs():
    return {
        'wrk': WRK_OUTPUT,
        'ab': AB_OUTPUT,
        'k6': K6_TEXT_OUTPUT,
        'autocannon': AUTOCANNON_OUTPUT,
        'siege': SIEGE_OUTPUT,
    }
